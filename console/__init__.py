"""
Listing Console - admin web console for real-estate listings.
"""
