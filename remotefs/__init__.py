"""
remotefs - idempotent storage provisioning for NFS and GlusterFS server nodes
"""
__version__ = "1.0.0"
