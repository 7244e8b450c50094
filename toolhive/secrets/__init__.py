"""Secrets: AES-GCM encryption, an encrypted file-backed provider, parameter parsing and 1Password reference resolution."""