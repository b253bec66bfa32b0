"""Price software packages from OpenFare lock files and manage payees, payment methods and extensions."""

__version__ = "0.1.0"