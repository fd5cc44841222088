"""Settings module"""
