"""HTTP application serving the exporter endpoints"""
