"""Naming, writing and listing SQL migration scripts and ordering their application."""