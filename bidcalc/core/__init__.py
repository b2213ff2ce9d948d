"""
bidcalc core: auction terms and bid settlement arithmetic.
"""
