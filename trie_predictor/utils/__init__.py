# trie_predictor/utils/__init__.py
# logging, config and timing helpers; import the submodules directly
