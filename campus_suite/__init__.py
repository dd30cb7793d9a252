"""Campus Support Suite - REST backend for student loans, scholarships,
the campus shop, banners and in-app notifications.
"""
