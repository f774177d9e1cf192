"""Skill Sprint Coach backend."""
