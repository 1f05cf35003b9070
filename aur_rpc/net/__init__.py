"""HTTP plumbing shared by the blocking and async clients."""
