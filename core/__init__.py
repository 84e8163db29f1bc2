"""Core engine packages"""
