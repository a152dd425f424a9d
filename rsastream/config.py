# rsastream/config.py
import os
from dotenv import load_dotenv

load_dotenv()

RSA_BITS = int(os.getenv("RSA_BITS", "512"))
RSA_PUBKEY_FILE = os.getenv("RSA_PUBKEY_FILE", "/tmp/rsa.pub")
RSA_PRIVKEY_FILE = os.getenv("RSA_PRIVKEY_FILE", "/tmp/rsa.priv")
RSA_MR_ROUNDS = int(os.getenv("RSA_MR_ROUNDS", "50"))
RSA_LOG_LEVEL = os.getenv("RSA_LOG_LEVEL", "WARNING")
