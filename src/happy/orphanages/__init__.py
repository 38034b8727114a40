"""
Orphanage listings: public browsing/submission and admin moderation.
"""
