"""
Applications Module

Student applications to placement drives and their state machine:
apply (eligibility-gated, idempotent), admin force-register, admin status
updates and student withdrawal.
"""
