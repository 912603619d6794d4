"""REST API for the collection service"""
