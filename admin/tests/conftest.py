import os

# Keep the startup health probe out of the request log during tests
os.environ.setdefault("ENV", "test")
