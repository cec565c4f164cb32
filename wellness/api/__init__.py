"""REST API for the wellness dashboard UI"""
