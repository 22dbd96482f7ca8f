"""
Server-side page assembly: rendering, page handoffs, forms and messaging links.
"""
