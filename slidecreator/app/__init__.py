"""
SlideCreator web application.
"""
