"""Currency module"""
