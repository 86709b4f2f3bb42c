"""Zander product catalog import"""
