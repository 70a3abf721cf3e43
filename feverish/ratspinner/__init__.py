"""Dialogue script types, the .rat and RON script parser, and the dialogue runtime."""