"""
Retro Meeting server: GraphQL API for team retrospectives and org billing
"""
__version__ = "0.1.0"
