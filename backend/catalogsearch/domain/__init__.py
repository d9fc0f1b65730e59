"""Domain layer: ports and plain models, no infrastructure imports"""
