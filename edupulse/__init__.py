"""EduPulse: online course marketplace API."""
