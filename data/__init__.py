"""Data layer - storage backends for the integration engine"""
