"""Pure building blocks: hashing, CI context, artifact matching, payload builders."""
