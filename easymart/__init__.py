"""EasyMart point-of-sale and inventory tracker."""

__version__ = "0.1.0"
