"""
Loaders de configuração (ambiente, filesystem e callables).

Todo Loader obedece ao protocolo `Loader` de `base`. O acesso exclusivo a
instâncias compartilhadas é garantido por `lock.ExclusiveLoader`.
"""
