"""Hosting transports: local aiohttp server and serverless function adapter."""
