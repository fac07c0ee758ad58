"""Terraform state reading and flat attribute encoding."""
