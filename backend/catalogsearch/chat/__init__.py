"""Conversational product search (tool-calling chat)"""
