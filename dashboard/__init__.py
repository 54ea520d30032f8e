"""Admin Console Service"""
