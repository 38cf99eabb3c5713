"""
Request and response schemas (camelCase on the wire).
"""
