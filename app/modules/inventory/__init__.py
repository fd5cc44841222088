"""Inventory module"""
