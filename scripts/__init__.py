"""
Scripts for MedsBuddy
Utility scripts for seeding and running the missed-dose job
"""
