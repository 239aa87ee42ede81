"""Snapout API: streak tracking, relapse journaling and community for recovery."""
