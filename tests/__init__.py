"""
Test suite for swerve_config package.

This directory contains automated unit tests that run against simulated
motor controllers and encoders, without robot hardware attached.
"""
