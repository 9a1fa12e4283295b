"""Metric models, catalogs and the collector registry"""
