"""
Services Module - Supabase repositories and domain services.
"""
