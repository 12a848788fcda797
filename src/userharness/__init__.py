"""Back-channel test oracle for a user-management system."""

__version__ = "0.1.0"
