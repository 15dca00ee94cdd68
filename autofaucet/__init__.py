"""Automated AutoFaucet login sessions."""
