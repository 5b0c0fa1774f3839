"""Infrastructure layer: record stores, Firestore REST client, SQL persistence, audit sink."""
