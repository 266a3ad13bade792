"""
Services for the Retro Meeting server
"""
