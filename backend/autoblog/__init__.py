"""AutoBlog Growth Engine backend: internal linking analyzer and API."""
