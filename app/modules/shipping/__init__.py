"""Shipping forms module"""
