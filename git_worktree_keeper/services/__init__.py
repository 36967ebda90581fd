"""Services that talk to git, GitHub and the filesystem."""
