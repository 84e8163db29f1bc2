"""Configuration - settings schema and registry files"""
