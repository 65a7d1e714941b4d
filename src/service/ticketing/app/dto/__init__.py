"""Application layer DTOs"""
