"""Site configuration, user register, session table and sklaffrc profile files for a simple conference system."""

__version__ = "1.32"