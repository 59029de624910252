"""
Streamlit front end — pages, CRUD form helpers and the console launcher.
"""
