"""Minimal CI report collector and dashboard"""
