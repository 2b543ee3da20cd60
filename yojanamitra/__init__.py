"""
YojanaMitra Eligibility Backend

Matches applicant profiles against Indian government welfare schemes and
explains the result with confidence levels and next actions.
"""

__version__ = "1.0.0"
__author__ = "YojanaMitra Team"
__description__ = "Explainable eligibility matching for government welfare schemes"
