"""Core protocol parsing, command dispatch and infrastructure for Chipsie"""
