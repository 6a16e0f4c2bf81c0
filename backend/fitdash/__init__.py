"""
FitDash - personal fitness dashboard backend.
"""
