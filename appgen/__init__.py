"""AppGen: turns natural-language app descriptions into structured code artifacts."""

__version__ = "0.1.0"
