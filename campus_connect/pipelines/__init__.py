"""
Pipeline functions that orchestrate several services per request.
"""
