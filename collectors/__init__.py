"""Metric collectors; modules here are discovered by the metrics registry"""
