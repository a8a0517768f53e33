"""
Students Module

Student academic profiles (read by the eligibility rules) and admin
management of student accounts: CSV bulk import, listing, deletion and
blocking.
"""
