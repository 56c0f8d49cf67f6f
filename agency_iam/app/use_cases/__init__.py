"""
Agency IAM Use Cases
"""
