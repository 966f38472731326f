"""
CardioMetAge Service

Biological-age scoring from clinical biomarkers with Gemini-generated
narrative insights.
"""
