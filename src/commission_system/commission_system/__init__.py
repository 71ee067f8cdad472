"""Commission System package.

Organized by feature modules (organization, projects, employees, reports, users)
with a thin Flask controller layer over service/repository layers. The
``access`` module holds scope resolution, integrity guards and request
authorization shared by every feature.
"""
